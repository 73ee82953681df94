"""Route-safety algorithm library.

Pure scoring/ranking algorithms consumed by ``saferoute.domains.routing``.
"""

from saferoute.planning.algorithms import *  # noqa: F401,F403
