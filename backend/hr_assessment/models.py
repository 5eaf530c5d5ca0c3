from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base


class AssessmentResultRow(Base):
	__tablename__ = "assessment_results"
	# Insertion order; result ids are timestamps and may be bumped on collision
	seq = Column(Integer, primary_key=True, autoincrement=True)
	id = Column(String(32), unique=True, index=True, nullable=False)
	organization_name = Column(String(256), nullable=False)
	submitted_at = Column(String(32), nullable=False)
	payload = Column(Text, nullable=False)  # full result as JSON string
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
