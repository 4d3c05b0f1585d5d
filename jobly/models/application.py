from sqlalchemy import Column, ForeignKey, Integer, String
from jobly.database import Base


class Application(Base):
    """A user applied to a job. The composite key makes re-applying a constraint violation."""
    __tablename__ = "applications"

    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
