"""
Base Configuration Classes.

Configs of components that own state tensors inherit from BaseConfig, so
device and dtype are handled the same way everywhere.

Author: Lamina Project
Date: October 2026
"""

from __future__ import annotations

from dataclasses import dataclass

import torch

from lamina.errors import ConfigurationError


@dataclass
class BaseConfig:
    """Base configuration with common fields for all components.

    Fields shared by every config whose component allocates state tensors:
    - device: Hardware device (cpu/cuda)
    - dtype: Tensor data type
    """

    device: str = "cpu"
    """Device to run on: 'cpu', 'cuda', 'cuda:0', etc."""

    dtype: str = "float32"
    """Data type for state tensors: 'float32', 'float64', 'float16'"""

    def get_torch_device(self) -> torch.device:
        """Get PyTorch device object."""
        return torch.device(self.device)

    def get_torch_dtype(self) -> torch.dtype:
        """Get PyTorch dtype object."""
        dtype_map = {
            "float32": torch.float32,
            "float64": torch.float64,
            "float16": torch.float16,
            "bfloat16": torch.bfloat16,
        }
        if self.dtype not in dtype_map:
            raise ConfigurationError(
                f"Unknown dtype '{self.dtype}'. "
                f"Choose from: {list(dtype_map.keys())}"
            )
        return dtype_map[self.dtype]


__all__ = ["BaseConfig"]
