from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import INVITE_ACCEPTED, INVITE_PENDING, INVITE_REJECTED, PartnerInvite, Partnership


def create_invite(db: Session, inviter_user_id: str, invitee_email: str) -> Optional[PartnerInvite]:
    invite = PartnerInvite(inviter_user_id=inviter_user_id, invitee_email=invitee_email, status=INVITE_PENDING)
    try:
        with db.begin_nested():
            db.add(invite)
    except IntegrityError:
        return None
    db.commit()
    db.refresh(invite)
    return invite


def get_invite(db: Session, invite_id: str) -> Optional[PartnerInvite]:
    return db.scalar(select(PartnerInvite).where(PartnerInvite.id == invite_id))


def get_pending_invites_for_inviter(db: Session, inviter_user_id: str) -> list[PartnerInvite]:
    return list(
        db.scalars(
            select(PartnerInvite)
            .where(PartnerInvite.inviter_user_id == inviter_user_id, PartnerInvite.status == INVITE_PENDING)
            .order_by(PartnerInvite.created_at.desc())
        )
    )


def get_pending_invites_for_email(db: Session, invitee_email: str) -> list[PartnerInvite]:
    return list(
        db.scalars(
            select(PartnerInvite)
            .where(PartnerInvite.invitee_email == invitee_email, PartnerInvite.status == INVITE_PENDING)
            .order_by(PartnerInvite.created_at.desc())
        )
    )


def _invite_for_pair(db: Session, inviter_user_id: str, invitee_email: str, status: str) -> Optional[PartnerInvite]:
    return db.scalar(
        select(PartnerInvite).where(
            PartnerInvite.inviter_user_id == inviter_user_id,
            PartnerInvite.invitee_email == invitee_email,
            PartnerInvite.status == status,
        )
    )


def get_pending_invite_for_pair(db: Session, inviter_user_id: str, invitee_email: str) -> Optional[PartnerInvite]:
    return _invite_for_pair(db, inviter_user_id, invitee_email, INVITE_PENDING)


def get_accepted_invite_for_pair(db: Session, inviter_user_id: str, invitee_email: str) -> Optional[PartnerInvite]:
    return _invite_for_pair(db, inviter_user_id, invitee_email, INVITE_ACCEPTED)


def delete_accepted_invite_for_pair(db: Session, inviter_user_id: str, invitee_email: str) -> None:
    db.execute(
        delete(PartnerInvite).where(
            PartnerInvite.inviter_user_id == inviter_user_id,
            PartnerInvite.invitee_email == invitee_email,
            PartnerInvite.status == INVITE_ACCEPTED,
        )
    )
    db.commit()


def delete_pending_invite_for_inviter(db: Session, invite_id: str, inviter_user_id: str) -> Optional[PartnerInvite]:
    invite = db.scalar(
        select(PartnerInvite).where(
            PartnerInvite.id == invite_id,
            PartnerInvite.inviter_user_id == inviter_user_id,
            PartnerInvite.status == INVITE_PENDING,
        )
    )
    if not invite:
        return None
    # Detach first so the returned row stays readable after the commit.
    db.expunge(invite)
    db.execute(delete(PartnerInvite).where(PartnerInvite.id == invite.id))
    db.commit()
    return invite


def reject_invite(db: Session, invite: PartnerInvite) -> PartnerInvite:
    # Only one rejected row may exist per pair.
    db.execute(
        delete(PartnerInvite).where(
            PartnerInvite.inviter_user_id == invite.inviter_user_id,
            PartnerInvite.invitee_email == invite.invitee_email,
            PartnerInvite.status == INVITE_REJECTED,
        )
    )
    invite.status = INVITE_REJECTED
    db.commit()
    db.refresh(invite)
    return invite


def accept_invite(db: Session, invite: PartnerInvite, user_a_id: str, user_b_id: str) -> Partnership:
    """Create (or reuse) the partnership for the pair and mark the invite accepted in one commit."""
    partnership = db.scalar(
        select(Partnership).where(Partnership.user_a_id == user_a_id, Partnership.user_b_id == user_b_id)
    )
    if partnership is None:
        partnership = Partnership(user_a_id=user_a_id, user_b_id=user_b_id)
        db.add(partnership)

    invite.status = INVITE_ACCEPTED
    db.commit()
    db.refresh(partnership)
    return partnership
