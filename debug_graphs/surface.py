from __future__ import annotations

from dataclasses import dataclass
import threading
from typing import Protocol, TypeAlias

import numpy as np
import torch


@dataclass(frozen=True)
class FullRewrite:
    tensor_h_w_4: torch.Tensor


@dataclass(frozen=True)
class ReplaceRect:
    x: int
    y: int
    width: int
    height: int
    rect_h_w_4: torch.Tensor


WriteOp: TypeAlias = FullRewrite | ReplaceRect


@dataclass(frozen=True)
class WriteBatch:
    operations: list[WriteOp]


class SurfaceTarget(Protocol):
    def submit_write_batch(self, batch: WriteBatch) -> int:
        ...


class OverlaySurface:
    """Host RGBA255 matrix the registry composites its plots into.

    Write batches are applied atomically. With `auto_grow` the matrix is enlarged
    (new area filled with `background`) instead of rejecting rects that overflow it,
    and a `FullRewrite` replaces it at whatever size the new frame has.
    """

    def __init__(
        self,
        height: int,
        width: int,
        background: tuple[int, int, int, int] = (0, 0, 0, 0),
        *,
        auto_grow: bool = False,
    ) -> None:
        if height < 0 or width < 0:
            raise ValueError("height and width must be >= 0")
        self.auto_grow = auto_grow
        self._background = torch.tensor(background, dtype=torch.uint8).view(1, 1, 4)
        self._write_lock = threading.Lock()
        self._revision = 0
        self._matrix = self._background.expand(height, width, 4).clone()

    @property
    def height(self) -> int:
        return int(self._matrix.shape[0])

    @property
    def width(self) -> int:
        return int(self._matrix.shape[1])

    @property
    def revision(self) -> int:
        return self._revision

    def read_snapshot(self) -> torch.Tensor:
        with self._write_lock:
            return self._matrix.clone()

    def to_numpy(self) -> np.ndarray:
        return self.read_snapshot().numpy()

    def submit_write_batch(self, batch: WriteBatch) -> int:
        if not batch.operations:
            raise ValueError("write batch must include at least one operation")

        with self._write_lock:
            staged = self._matrix.clone()
            for op in batch.operations:
                staged = self._apply_operation(staged, op)
            self._matrix = staged
            self._revision += 1
            return self._revision

    def _grow(self, matrix: torch.Tensor, height: int, width: int) -> torch.Tensor:
        h, w, _ = matrix.shape
        if height <= h and width <= w:
            return matrix
        grown = self._background.expand(max(h, height), max(w, width), 4).clone()
        grown[:h, :w, :] = matrix
        return grown

    def _apply_operation(self, matrix: torch.Tensor, op: WriteOp) -> torch.Tensor:
        if isinstance(op, FullRewrite):
            shape = tuple(op.tensor_h_w_4.shape)
            if self.auto_grow and len(shape) == 3:
                matrix = self._background.expand(shape[0], shape[1], 4).clone()
            return _checked_rgba_tensor(op.tensor_h_w_4, tuple(matrix.shape))
        if isinstance(op, ReplaceRect):
            if self.auto_grow:
                matrix = self._grow(matrix, op.y + op.height, op.x + op.width)
            _validate_rect(op.x, op.y, op.width, op.height, int(matrix.shape[1]), int(matrix.shape[0]))
            patch = _checked_rgba_tensor(op.rect_h_w_4, (op.height, op.width, 4))
            matrix[op.y : op.y + op.height, op.x : op.x + op.width, :] = patch
            return matrix
        raise TypeError(f"Unsupported write op: {type(op)!r}")


def compile_replace_patches_batch(patches: list[tuple[int, int, np.ndarray]]) -> WriteBatch:
    ops: list[WriteOp] = []
    for x, y, patch_rgba in patches:
        if patch_rgba.dtype != np.uint8:
            raise ValueError("patch_rgba must be uint8")
        if patch_rgba.ndim != 3 or patch_rgba.shape[2] != 4:
            raise ValueError("patch_rgba must have shape (H, W, 4)")
        if x < 0 or y < 0:
            raise ValueError("rect x/y must be >= 0")
        height, width, _ = patch_rgba.shape
        if width <= 0 or height <= 0:
            continue
        patch = torch.from_numpy(np.ascontiguousarray(patch_rgba))
        ops.append(ReplaceRect(x=x, y=y, width=width, height=height, rect_h_w_4=patch))
    if not ops:
        raise ValueError("patches must include at least one non-empty patch")
    return WriteBatch(ops)


def _validate_rect(x: int, y: int, width: int, height: int, matrix_width: int, matrix_height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError("rect width/height must be > 0")
    if x < 0 or y < 0:
        raise ValueError("rect x/y must be >= 0")
    if x + width > matrix_width or y + height > matrix_height:
        raise ValueError("rect exceeds surface bounds")


def compile_full_rewrite_batch(frame_rgba: np.ndarray) -> WriteBatch:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")
    return WriteBatch([FullRewrite(torch.from_numpy(np.ascontiguousarray(frame_rgba)))])


def _checked_rgba_tensor(value: torch.Tensor, expected_shape: tuple[int, ...]) -> torch.Tensor:
    if not torch.is_tensor(value):
        raise ValueError("rgba tensor must be a torch.Tensor")
    if tuple(value.shape) != expected_shape:
        raise ValueError(f"rgba tensor has invalid shape: {tuple(value.shape)} expected {expected_shape}")
    if value.dtype != torch.uint8:
        raise ValueError(f"rgba tensor must be uint8, got {value.dtype}")
    return value.clone()
