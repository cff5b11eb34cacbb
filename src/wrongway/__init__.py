"""
wrongway — jokes that get interrupted by their own teller.

A request (scenario, roles, tone, length) is turned into a prompt, sent to an
OpenAI-compatible chat backend, and whatever comes back is repaired into a
JokeArtifact whose joke ends with exactly one sanctioned "mishap line".

Usage:
    from wrongway.generation.pipeline import JokePipeline
    from wrongway.common.config import load_settings

    pipeline = JokePipeline(load_settings())
    artifact = pipeline.run({"scenario": "Queue", "roles": ["Visitor"], "tone": "Dry"})
"""

__version__ = "0.1.0"
