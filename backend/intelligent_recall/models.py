from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from .db import Base


class IncomingResourceRow(Base):
	__tablename__ = "incoming_resources"
	# Rows are written by the n8n capture workflow; the dashboard only reads them
	id = Column(String(64), primary_key=True)
	type = Column(String(16), nullable=False)  # "article" or "video"
	title = Column(String(512), nullable=False)
	source = Column(String(256), nullable=True)
	content = Column(Text, nullable=True)
	url = Column(String(1024), nullable=True)
	status = Column(String(16), default="new", nullable=False, index=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)  # naive UTC
