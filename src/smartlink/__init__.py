"""SmartLink - listen-link resolution and click attribution."""

__version__ = "0.1.0"
