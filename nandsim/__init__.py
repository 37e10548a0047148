"""File-backed NAND SSD simulator with a write-back command buffer and a command-line front end."""

__version__ = "0.1.0"
__all__ = ["ssd", "command_buffer", "command_checker"]