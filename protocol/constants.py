"""Protocol constants for the time service.

These are protocol-level constants that should not be changed
without updating both client and server implementations.
"""

# Default UDP port of the time server
DEFAULT_PORT = 27015

# Maximum datagram size in bytes, for requests and responses alike
MAX_DATAGRAM_SIZE = 255

# Byte preceding every request parameter
PARAM_SEPARATOR = b'\x00'

# Width of an integer response before leading zero bytes are stripped
BOUNDED_INT_SIZE = 4

# Largest value an integer response can carry
BOUNDED_INT_MAX = 2 ** (8 * BOUNDED_INT_SIZE) - 1

# Response to a MEASURE_RTT request
PONG = b'\x00'

# Lap timers older than this many seconds are discarded
LAP_EXPIRY_SECONDS = 180

# Text sent back when a lap timer is started
LAP_STARTED_TEXT = "Timer started"

# Number of request/response cycles used by the aggregate measurements
AGGREGATE_ITERATIONS = 100
