"""Terminal interface for Reality Reigns."""
