"""User profile reconciliation for externally verified (Google) identities.

A Google sign-in may belong to a brand new learner, to someone who signed up
with a password under the same email, or to someone who already linked.
All three cases go through one ``INSERT ... ON CONFLICT (email) DO UPDATE``
so two concurrent first sign-ins cannot both create a row.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from webculus.db.models import User
from webculus.db.upsert import dialect_insert

logger = logging.getLogger(__name__)


def find_or_create_and_link(
    db: Session,
    email: str,
    name: str,
    google_id: str | None = None,
) -> User:
    """Return the profile for *email*, creating it if needed.

    An existing row keeps its name and password; its ``google_id`` is filled
    in only when it has none. Raises ``IntegrityError`` when *google_id* is
    already linked to a different email.
    """
    users = User.__table__
    now = datetime.now(timezone.utc)

    stmt = dialect_insert(db, users).values(
        id=uuid.uuid4(),
        email=email,
        name=name,
        google_id=google_id,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[users.c.email],
        set_={
            "google_id": func.coalesce(users.c.google_id, stmt.excluded.google_id),
            "updated_at": now,
        },
    )
    db.execute(stmt)
    db.commit()

    user = db.scalars(select(User).where(User.email == email)).one()
    # the upsert bypassed the identity map; drop any stale copy
    db.refresh(user)
    logger.info("Resolved Google profile %s for %s", user.id, email)
    return user
