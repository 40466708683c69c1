"""레포지토리 패키지 — 신고/코멘트 저장 계층.

Repository package — Report and comment storage.
ReportRepository and CommentRepository query PostgreSQL (or SQLite in tests)
through BaseRepository; MemoryReportStore offers the same methods backed by
process memory for development without a database.
"""
