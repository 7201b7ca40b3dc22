"""Clip selection and crossfaded playback for creature skeletons.

A creature is either motion-only (:class:`NoAnimation`) or plays exactly one
looping clip (:class:`Animated`). The variant is fixed when the asset is
populated; assets without clips are not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Union

from ..assets.types import AnimationClip
from ..config.constants import SWIM_CLIP_NAMES

logger = logging.getLogger("aquarium.simulation")

Pose = Dict[str, float]


@dataclass
class ClipPlayer:
    """Local clock and fade weight for one playing clip."""

    clip: AnimationClip
    rate: float
    fade_seconds: float
    time: float = 0.0
    fade_time: float = 0.0
    playing: bool = True

    @property
    def weight(self) -> float:
        if self.fade_seconds <= 0.0:
            return 1.0
        return min(1.0, self.fade_time / self.fade_seconds)

    def advance(self, delta: float) -> None:
        if not self.playing:
            return
        self.time += delta * self.rate
        if self.clip.duration > 0.0:
            self.time %= self.clip.duration
        self.fade_time = min(self.fade_time + delta, max(0.0, self.fade_seconds))

    def pose(self) -> Pose:
        weight = self.weight
        return {joint: angle * weight for joint, angle in self.clip.sample(self.time).items()}

    def stop(self) -> None:
        self.playing = False


@dataclass(frozen=True)
class NoAnimation:
    """Motion-only mode: the asset carries no clips."""


@dataclass
class Animated:
    clip: AnimationClip
    rate: float
    fade: float
    player: Optional[ClipPlayer] = field(default=None, repr=False)


AnimationState = Union[NoAnimation, Animated]


def select_clip(clips: Sequence[AnimationClip], name: Optional[str]) -> Optional[AnimationClip]:
    """Pick the named clip, then a known swim clip, then the first clip."""

    if not clips:
        return None
    by_name = {clip.name: clip for clip in clips}
    if name and name in by_name:
        return by_name[name]
    if name:
        logger.debug("Clip %r not found; falling back", name)
    for fallback in SWIM_CLIP_NAMES:
        if fallback in by_name:
            return by_name[fallback]
    return clips[0]


class AnimationBlender:
    """Owns the animation variant of one creature."""

    def __init__(
        self,
        clips: Sequence[AnimationClip],
        *,
        name: Optional[str] = None,
        rate: float = 1.0,
        fade_seconds: float = 0.3,
    ) -> None:
        clip = select_clip(clips, name)
        self.state: AnimationState
        if clip is None:
            self.state = NoAnimation()
            return
        player = ClipPlayer(clip=clip, rate=rate, fade_seconds=fade_seconds)
        self.state = Animated(clip=clip, rate=rate, fade=fade_seconds, player=player)

    @property
    def has_active_clip(self) -> bool:
        state = self.state
        return isinstance(state, Animated) and state.player is not None and state.player.playing

    @property
    def clip_name(self) -> Optional[str]:
        if isinstance(self.state, Animated):
            return self.state.clip.name
        return None

    def advance(self, delta: float) -> None:
        state = self.state
        if isinstance(state, NoAnimation):
            return
        if state.player is not None:
            state.player.advance(delta)

    def pose(self) -> Optional[Pose]:
        state = self.state
        if isinstance(state, NoAnimation) or state.player is None:
            return None
        return state.player.pose()

    def stop(self) -> None:
        """Stop the clip and drop its player; later calls are no-ops."""

        state = self.state
        if isinstance(state, Animated) and state.player is not None:
            state.player.stop()
            state.player = None
