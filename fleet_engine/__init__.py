"""
Service-job lifecycle and exclusive resource assignment engine for a vehicle fleet.
"""
