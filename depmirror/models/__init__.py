from .dependency import MirrorArchiveEntry, ReleaseInfo, RepositoryConfig
from .outcome import SyncOutcome

__all__ = ["MirrorArchiveEntry", "ReleaseInfo", "RepositoryConfig", "SyncOutcome"]
