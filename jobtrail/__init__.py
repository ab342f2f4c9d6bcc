"""
jobtrail - résumé and profile normalization for a job-application tracker

Converts résumé content between its stored shapes (canonical JSON, legacy
markdown-flavoured text, AI-extracted section payloads) and merges imported
data into a user profile without duplicates.

Architecture:
- Normalization Context: format detection, section splitting, field extraction,
  JSON adaptation, serialization, uncertainty tracking
- Profile Context: profile data model, merge engine, certification detection,
  import orchestration
- Intake Context: structured-extraction payload adapters and job-posting data
"""

__version__ = "0.1.0"
