"""Asset loading boundary: descriptors in, scene graphs and clips out."""

from .types import AnimationClip, BoundingBox, LoadedAsset, LoadError, SceneGraph
from .loader import AssetLoader, DescriptorAssetLoader, parse_descriptor
from .scheduler import LoadOutcome, LoadScheduler

__all__ = [
    "AnimationClip",
    "AssetLoader",
    "BoundingBox",
    "DescriptorAssetLoader",
    "LoadError",
    "LoadOutcome",
    "LoadScheduler",
    "LoadedAsset",
    "SceneGraph",
    "parse_descriptor",
]
