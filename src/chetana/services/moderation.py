# src/chetana/services/moderation.py
"""Moderation services: pinning, reports and content removal."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from chetana.db.session import atomic
from chetana.db.time import utcnow
from chetana.models import ForumComment, ForumPost, ForumReport
from chetana.models.moderation import REPORT_DELETED, REPORT_DISMISSED, REPORT_PENDING
from chetana.schemas.common import TargetType
from chetana.schemas.forum import ReportOut
from chetana.services import ledger
from chetana.services.errors import InvalidRequestError, NotFoundError, PermissionDeniedError
from chetana.services.roles import is_admin

logger = logging.getLogger(__name__)

REPORT_REASON_MIN = 5
REPORT_REASON_MAX = 500


class ModerationService:
    """Service handling moderator and author actions on forum content."""

    @staticmethod
    def toggle_pin(
        db: Session,
        target_type: TargetType,
        target_id: int,
        actor_uid: str,
    ) -> bool:
        """Flip the pinned flag of a post or comment and return the new state.

        Raises:
            PermissionDeniedError: If ``actor_uid`` is not an administrator
            NotFoundError: If the target does not exist
        """
        if not is_admin(actor_uid):
            raise PermissionDeniedError("Only admins can pin content")

        with atomic(db):
            target = ledger.get_target(db, target_type, target_id, for_update=True)
            target.pinned = not target.pinned
            pinned = target.pinned

        logger.info("%s %d %s by %s", target_type, target_id, "pinned" if pinned else "unpinned", actor_uid)
        return pinned

    @staticmethod
    def file_report(
        db: Session,
        target_type: TargetType,
        content_id: int,
        reason: str,
        reporter_uid: str,
    ) -> ForumReport:
        """Record a pending report; repeated reports of the same content are kept."""
        if not REPORT_REASON_MIN <= len(reason) <= REPORT_REASON_MAX:
            raise InvalidRequestError(
                f"Reason must be between {REPORT_REASON_MIN} and {REPORT_REASON_MAX} characters"
            )

        report = ForumReport(
            type=target_type,
            content_id=content_id,
            reason=reason,
            reporter_uid=reporter_uid,
            status=REPORT_PENDING,
        )
        with atomic(db):
            db.add(report)
        return report

    @staticmethod
    def resolve_report(
        db: Session,
        report_id: int,
        action: str,
        resolver_uid: str | None = None,
    ) -> ForumReport:
        """Close a report by deleting the reported content or dismissing it.

        Resolution is not idempotent: resolving again with ``delete`` removes
        the content if it still exists and stamps a new resolution time.
        When ``resolver_uid`` is given it must be an admin identity.
        """
        if action not in ("delete", "dismiss"):
            raise InvalidRequestError("Invalid action")
        if resolver_uid is not None and not is_admin(resolver_uid):
            raise PermissionDeniedError("Only admins can resolve reports")

        with atomic(db):
            report = db.scalars(
                select(ForumReport).where(ForumReport.id == report_id).with_for_update()
            ).first()
            if report is None:
                raise NotFoundError("Report not found")

            if action == "delete":
                _remove_content(db, report.type, report.content_id)  # type: ignore[arg-type]
                report.status = REPORT_DELETED
            else:
                report.status = REPORT_DISMISSED
            report.resolved_at = utcnow()

        logger.info("Report %d resolved as %s by %s", report_id, report.status, resolver_uid)
        return report

    @staticmethod
    def delete_content(
        db: Session,
        target_type: TargetType,
        target_id: int,
        actor_uid: str,
    ) -> None:
        """Hard-delete a post or comment on behalf of its author or an admin.

        Deleting a post removes its comments in the same transaction.
        """
        with atomic(db):
            target = ledger.get_target(db, target_type, target_id, for_update=True)
            if target.author_uid != actor_uid and not is_admin(actor_uid):
                raise PermissionDeniedError(f"Not authorized to delete this {target_type}")
            _remove_content(db, target_type, target_id)

    @staticmethod
    def pending_reports(db: Session) -> list[ReportOut]:
        """List unresolved reports, newest first, with a preview of the content."""
        rows = db.execute(
            select(
                ForumReport,
                ForumPost.title,
                ForumPost.author_uid,
                ForumComment.content,
                ForumComment.author_uid,
            )
            .outerjoin(
                ForumPost,
                (ForumReport.type == "post") & (ForumReport.content_id == ForumPost.id),
            )
            .outerjoin(
                ForumComment,
                (ForumReport.type == "comment") & (ForumReport.content_id == ForumComment.id),
            )
            .where(ForumReport.status == REPORT_PENDING)
            .order_by(ForumReport.created_at.desc(), ForumReport.id.desc())
        )

        reports: list[ReportOut] = []
        for report, post_title, post_author, comment_content, comment_author in rows:
            out = ReportOut.model_validate(report)
            if report.type == "post":
                out.content_preview, out.author_uid = post_title, post_author
            else:
                out.content_preview, out.author_uid = comment_content, comment_author
            reports.append(out)
        return reports


def _remove_content(db: Session, target_type: TargetType, target_id: int) -> bool:
    """Delete a post (with its comments) or a comment, and their vote rows.

    Returns False when the content was already gone.
    """
    if target_type == "post":
        post = db.get(ForumPost, target_id)
        if post is None:
            return False
        comment_ids = list(
            db.scalars(select(ForumComment.id).where(ForumComment.post_id == target_id))
        )
        ledger.forget_votes(db, "comment", comment_ids)
        ledger.forget_votes(db, "post", [target_id])
        db.query(ForumComment).filter(ForumComment.post_id == target_id).delete(
            synchronize_session=False
        )
        db.expire(post, ["comments"])
        db.delete(post)
        return True

    comment = db.get(ForumComment, target_id)
    if comment is None:
        return False
    ledger.forget_votes(db, "comment", [target_id])
    db.delete(comment)
    return True
