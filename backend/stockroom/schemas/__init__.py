"""Pydantic request/response schemas.

Read models are the fixed projections exposed at the API boundary; write
models forbid unknown fields so clients cannot mass-assign columns.
"""
