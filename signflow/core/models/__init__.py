"""
Models package: domain enums and API I/O schemas.
"""
