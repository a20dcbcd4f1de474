"""Hypervisor guest utilization reporting for Chef-managed KVM hosts."""

__version__ = "0.1.0"
