import logging

from sqlalchemy.orm import Session
from models.log import Log
from utils.transaction import Transaction

# Queue an audit row in the caller's transaction; it is committed or rolled back with the change it records
def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", meta=None):
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, meta=meta or {})
    db.add(entry)
    return entry

# Record a rejected attempt in a transaction of its own, after the attempt was rolled back
def record_failure(db: Session, log: logging.Logger, *, user_id, action, resource, meta=None):
    with Transaction(db, log, f"{action}_FAIL"):
        write_log(db, user_id=user_id, action=action, resource=resource, status="FAIL", meta=meta)

# Id of the authenticated caller, None on routes whose policy is public
def actor_id(current_user):
    return current_user.id if current_user is not None else None
