"""Upstream completion access package.

Architectural role:
    Provides relay configuration, credential resolution, the outbound transport
    client, and the response interpreter used by the relay core.

Module split:
    - `provider_config`: environment-driven relay configuration.
    - `credentials`: credential lookup over a resolved configuration.
    - `client`: single-request HTTP transport to the inference endpoint.
    - `interpreter`: layered extraction of completion text from raw responses.
"""
