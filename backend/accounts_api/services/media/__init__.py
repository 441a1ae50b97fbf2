from accounts_api.services.media.service import MediaService, staged_file

__all__ = ["MediaService", "staged_file"]
