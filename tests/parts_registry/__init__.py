"""
Parts Registry Tests

Test Sections:
    access         Admin checks, pause switch, admin hand-over
    allocator      Gap-free identifier allocation
    lifecycle      Register, transfer, status update, burn
    history        Per-part indexed history log
    queries        Read surface and defaults
    journal        Attestations, snapshot and replay
    concurrency    Serialized mutations under threads

Acceptance Rule:
    A rejected call must leave the registry exactly as it found it.
"""
