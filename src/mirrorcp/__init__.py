from .client import Client, Content, ContentEvent, ContentKind, new_client
from .config import Config, HostConfig, load_config
from .exceptions import MirrorCpError
from .plan import (
    AvailabilityOracle,
    CopyInstruction,
    CopyShape,
    MirrorInstruction,
    check_copy_syntax,
    check_mirror_syntax,
    guess_copy_shape,
    prepare_copy_urls,
    prepare_mirror_urls,
)
from .transfer import TransferReport, copy_object, run_copy, run_mirror

__all__ = [
    "Client", "Content", "ContentEvent", "ContentKind", "new_client",
    "Config", "HostConfig", "load_config", "MirrorCpError",
    "AvailabilityOracle", "CopyInstruction", "CopyShape", "MirrorInstruction",
    "check_copy_syntax", "check_mirror_syntax", "guess_copy_shape",
    "prepare_copy_urls", "prepare_mirror_urls",
    "TransferReport", "copy_object", "run_copy", "run_mirror",
]
