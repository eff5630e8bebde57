"""
Course System Configuration
Database, site and formatting settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "lms_db")

# Site
SITE_URL = os.getenv("SITE_URL", "http://localhost").rstrip("/")
SITE_COURSE_ID = int(os.getenv("SITE_COURSE_ID", "1"))  # front page, never listed
EXCLUDED_COURSE_KEYWORD = os.getenv("EXCLUDED_COURSE_KEYWORD", "ePortfolio")

# Roles
TEACHER_ROLE_SHORTNAME = "editingteacher"
STUDENT_ROLE_SHORTNAME = "student"

# Formatting
DATE_FORMAT = os.getenv("DATE_FORMAT", "%d/%m/%Y")
UNDEFINED_DATE_LABEL = os.getenv("UNDEFINED_DATE_LABEL", "Non défini")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
