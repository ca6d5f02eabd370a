"""trellis-setup — component-selection and provisioning orchestrator."""

__version__ = "0.1.0"
