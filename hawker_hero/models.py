import enum
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


# --------------------
# Users
# --------------------
class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(Role, values_callable=lambda roles: [r.value for r in roles], native_enum=False, length=10),
        nullable=False,
        default=Role.USER,
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    reviews = db.relationship("Review", backref="author", lazy=True)
    comments = db.relationship("Comment", backref="author", lazy=True)
    favorites = db.relationship("Favorite", backref="owner", lazy=True)
    recommendations = db.relationship("Recommendation", backref="author", lazy=True)

    @property
    def is_admin(self):
        return self.role == Role.ADMIN


# --------------------
# Hawker centers
# --------------------
class HawkerCenter(db.Model):
    __tablename__ = "hawker_centers"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    facilities = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # lookup only: deleting a center with stalls is refused by the service
    stalls = db.relationship("Stall", backref="center", lazy=True, passive_deletes="all")


# --------------------
# Stalls
# --------------------
class Stall(db.Model):
    __tablename__ = "stalls"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    cuisine = db.Column(db.String(80), nullable=False)
    center_id = db.Column(db.Integer, db.ForeignKey("hawker_centers.id"), nullable=True)
    image = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    food_items = db.relationship("FoodItem", backref="stall", lazy=True, cascade="all, delete-orphan")
    reviews = db.relationship("Review", backref="stall", lazy=True, cascade="all, delete-orphan")
    recommendations = db.relationship("Recommendation", backref="stall", lazy=True, cascade="all, delete-orphan")
    favorites = db.relationship("Favorite", backref="stall", lazy=True, cascade="all, delete-orphan")


# --------------------
# Food items
# --------------------
class FoodItem(db.Model):
    __tablename__ = "food_items"
    __table_args__ = (db.CheckConstraint("price >= 0", name="ck_food_items_price"),)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.Text, nullable=True)
    stall_id = db.Column(db.Integer, db.ForeignKey("stalls.id"), nullable=False)
    image = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    favorites = db.relationship("Favorite", backref="food", lazy=True, cascade="all, delete-orphan")
    # recommendations outlive the dish; their food_id is cleared
    recommendations = db.relationship("Recommendation", backref="food", lazy=True)


# --------------------
# Reviews & comments
# --------------------
class Review(db.Model):
    __tablename__ = "reviews"
    __table_args__ = (db.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    stall_id = db.Column(db.Integer, db.ForeignKey("stalls.id"), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    comments = db.relationship(
        "Comment", backref="review", lazy=True, cascade="all, delete-orphan", order_by="Comment.created_at"
    )


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    review_id = db.Column(db.Integer, db.ForeignKey("reviews.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    comment = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)


# --------------------
# Favorites
# --------------------
class Favorite(db.Model):
    __tablename__ = "favorites"
    __table_args__ = (
        db.CheckConstraint("stall_id IS NOT NULL OR food_id IS NOT NULL", name="ck_favorites_target"),
        db.UniqueConstraint("user_id", "stall_id", name="uq_favorites_user_stall"),
        db.UniqueConstraint("user_id", "food_id", name="uq_favorites_user_food"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    stall_id = db.Column(db.Integer, db.ForeignKey("stalls.id"), nullable=True)
    food_id = db.Column(db.Integer, db.ForeignKey("food_items.id"), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=True)

    @property
    def label(self):
        if self.food is not None:
            return self.food.name
        return self.stall.name if self.stall is not None else ""


# --------------------
# Recommendations
# --------------------
class Recommendation(db.Model):
    __tablename__ = "recommendations"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    stall_id = db.Column(db.Integer, db.ForeignKey("stalls.id"), nullable=False)
    food_id = db.Column(db.Integer, db.ForeignKey("food_items.id"), nullable=True)
    tip = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)


# --------------------
# Server-side sessions
# --------------------
class SessionRecord(db.Model):
    __tablename__ = "sessions"

    id = db.Column(db.String(64), primary_key=True)
    data = db.Column(db.Text, nullable=False, default="{}")
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
