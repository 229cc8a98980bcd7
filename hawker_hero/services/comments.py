import logging

from ..auth import require_owner_or_admin
from ..errors import ValidationError
from ..models import Comment, db
from . import commit, get_or_404
from .reviews import get_review

logger = logging.getLogger(__name__)


def get_comment(comment_id):
    return get_or_404(Comment, comment_id)


def add_comment(actor, review_id, text):
    review = get_review(review_id)
    text = (text or "").strip()
    if not text:
        raise ValidationError({"comment": "Comment cannot be empty."})
    comment = Comment(review_id=review.id, user_id=actor.id, comment=text)
    db.session.add(comment)
    commit("posting a comment")
    return comment


def edit_comment(actor, comment_id):
    comment = get_comment(comment_id)
    require_owner_or_admin(actor, comment.user_id)
    return comment


def update_comment(actor, comment_id, text):
    comment = edit_comment(actor, comment_id)
    text = (text or "").strip()
    if not text:
        raise ValidationError({"comment": "Comment cannot be empty."})
    comment.comment = text
    commit("updating a comment")
    return comment


def delete_comment(actor, comment_id):
    comment = edit_comment(actor, comment_id)
    db.session.delete(comment)
    commit("deleting a comment")
    logger.info("Comment %s deleted by user %s", comment_id, actor.id)
