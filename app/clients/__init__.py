from app.clients.hrms_client import HRMSReader, BackendSource, SupabaseSource

__all__ = ["HRMSReader", "BackendSource", "SupabaseSource"]
