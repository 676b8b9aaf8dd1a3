# File: vidshare/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. All feature models (Channel, Video, Job) inherit from this.
Base = declarative_base()
