"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
report_service validates input and orchestrates the report stores;
storage_service places photos on S3 or local disk.
"""
