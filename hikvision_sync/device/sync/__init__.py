"""Device event sync infrastructure.

Modules:
    dedup       : Dedup key (employee_id + device_time + minor) and upsert SQL
    upserter    : Per-record insert / update / skip classification
    orchestrator: One full fetch → normalize → upsert cycle
    scheduler   : Periodic background sync
"""
