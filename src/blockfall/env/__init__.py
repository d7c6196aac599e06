"""Gymnasium environments for Blockfall."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the default 12x24 falling-block environment
register(
    id="FallingBlocks-12x24-v0",
    entry_point="blockfall.env.falling_blocks_env:FallingBlocksEnv",
)

__all__ = ["FallingBlocks-12x24-v0"]
