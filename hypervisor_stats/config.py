# config.py

"""Configuration settings for Hypervisor Stats."""

# Memory figures are normalized to KiB before any arithmetic
BASE_UNIT = "KiB"

# Multipliers to the base unit, keyed by lower-cased unit token
SIZE_UNITS = {
    "b": 1.0 / 1024,
    "bytes": 1.0 / 1024,
    "k": 1.0,
    "kb": 1.0,
    "kib": 1.0,
    "m": 1024.0,
    "mb": 1024.0,
    "mib": 1024.0,
    "g": 1024.0 ** 2,
    "gb": 1024.0 ** 2,
    "gib": 1024.0 ** 2,
    "t": 1024.0 ** 3,
    "tb": 1024.0 ** 3,
    "tib": 1024.0 ** 3,
}

# Ohai KVM plugin schema (kvm_extensions.rb)
PROBE_PATH = ("automatic", "virtualization", "kvm")
PROBE_TIME_KEY = "ohai_time"
HARDWARE_KEY = "hardware"
MEMORY_SIZE_KEY = "Memory size"
CPUS_KEY = "CPU(s)"
GUESTS_KEY = "guests"
GUEST_STATE_KEY = "state"
GUEST_MAX_MEMORY_KEY = "Max memory"
GUEST_USED_MEMORY_KEY = "Used memory"
GUEST_CPU_TOTAL_KEY = "guest_cpu_total"
GUEST_MAXMEMORY_TOTAL_KEY = "guest_maxmemory_total"
GUEST_USEDMEMORY_TOTAL_KEY = "guest_usedmemory_total"

# virsh domain states as reported by the probe
RUNNING_STATES = {"running"}
PAUSED_STATES = {"paused", "pmsuspended"}
STOPPED_STATES = {"shut off", "shutoff", "stopped", "crashed", "in shutdown"}

# Chef server defaults
DEFAULT_CHEF_SERVER_HOST = "localhost"
DEFAULT_CHEF_SERVER_PORT = 4000
DEFAULT_NODE_QUERY = "role:hypervisor"
CHEF_API_VERSION = "12.0.0"
SEARCH_PAGE_SIZE = 100
REQUEST_TIMEOUT = 30  # seconds

# Per-host processing
DEFAULT_MAX_WORKERS = 4

# Optional environment overrides for the command line
CHEF_SERVER_URL_ENV = 'CHEF_SERVER_URL'
CHEF_USERNAME_ENV = 'CHEF_USERNAME'
CHEF_CLIENT_KEY_ENV = 'CHEF_CLIENT_KEY'
ENV_VARS = [
    CHEF_SERVER_URL_ENV,
    CHEF_USERNAME_ENV,
    CHEF_CLIENT_KEY_ENV
]

# Report rendering
RULE_WIDTH = 60
UNDEFINED_RATIO = "n/a"

# Logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
