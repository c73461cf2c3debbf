"""edgerelay API adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation, error translation, and response shaping.
- Delegates completion work to the core relay.

Scope:
- Request lifecycle control for adapter concerns only.
- No direct upstream invocation logic is implemented in this package root.
"""
