from ..models import Favorite, HawkerCenter, Recommendation, Review, Stall, User

RECENT_LIMIT = 3
ACTIVITY_LIMIT = 5
TIP_PREVIEW = 50


def user_dashboard(actor):
    """Counts, latest items and a merged activity feed for one user."""
    reviews = (
        Review.query.filter_by(user_id=actor.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    favorites = (
        Favorite.query.filter_by(user_id=actor.id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    recommendations = (
        Recommendation.query.filter_by(user_id=actor.id)
        .order_by(Recommendation.created_at.desc(), Recommendation.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )

    activity = []
    for review in reviews:
        activity.append({
            "kind": "review",
            "subject": review.stall.name,
            "date": review.created_at,
            "details": f"{review.rating} stars",
        })
    for favorite in favorites:
        activity.append({
            "kind": "favorite",
            "subject": favorite.label,
            "date": favorite.created_at,
            "details": f"Note: {favorite.notes}" if favorite.notes else None,
        })
    for rec in recommendations:
        tip = rec.tip if len(rec.tip) <= TIP_PREVIEW else rec.tip[:TIP_PREVIEW] + "..."
        activity.append({
            "kind": "recommendation",
            "subject": rec.stall.name,
            "date": rec.created_at,
            "details": tip,
        })
    activity.sort(key=lambda entry: entry["date"], reverse=True)

    return {
        "stats": {
            "reviews_count": Review.query.filter_by(user_id=actor.id).count(),
            "favorites_count": Favorite.query.filter_by(user_id=actor.id).count(),
            "recommendations_count": Recommendation.query.filter_by(user_id=actor.id).count(),
        },
        "recent_reviews": reviews,
        "recent_favorites": favorites,
        "recent_recommendations": recommendations,
        "recent_activity": activity[:ACTIVITY_LIMIT],
    }


def admin_stats():
    return {
        "users": User.query.count(),
        "hawker_centers": HawkerCenter.query.count(),
        "stalls": Stall.query.count(),
        "reviews": Review.query.count(),
    }
