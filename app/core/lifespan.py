from contextlib import asynccontextmanager
import logging

from app.api.deps import get_resume_store, get_vector_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = get_resume_store()
    vector_store = get_vector_store()

    # The faiss index lives in memory; rebuild it from persisted profiles.
    restored = 0
    for profile in store.list_all():
        try:
            vector_store.store(profile)
            restored += 1
        except Exception as exc:  # pragma: no cover - startup must not fail on one bad record
            logger.warning("vector_store_restore_failed resume=%s: %s", profile.id, exc)
    logger.info("vector_store_restored count=%s", restored)

    yield
