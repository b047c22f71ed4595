from contextlib import contextmanager
import logging
from models import db


@contextmanager
def transactional(message="DB transaction failed", expected=()):
    """Run the block as one grouped write: commit on success, roll back on error.

    The exception is re-raised unchanged so service code can translate it
    into a domain error. Exception types listed in ``expected`` are logged at
    info level without a traceback.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as e:
        if expected and isinstance(e, expected):
            logging.info(f"{message}: %s", e)
        else:
            logging.error(f"{message}: %s", e, exc_info=True)
        db.session.rollback()
        raise
