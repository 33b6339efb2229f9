"""nodefleet: control plane for clusters of nodes and their power operations."""
