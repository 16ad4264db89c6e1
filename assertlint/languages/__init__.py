"""Language front ends that feed the checker engine."""
