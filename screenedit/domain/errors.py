# -*- coding: utf-8 -*-
"""
Errors surfaced to the user by the export pipeline
"""


class ExportValidationError(ValueError):
    """Export inputs are not usable; the message is shown to the user as is"""


class ExportCancelledError(RuntimeError):
    """The running ffmpeg process was stopped on request"""
