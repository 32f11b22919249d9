"""Agentic UI Bridge.

This package connects independent UI components to a natural-language agent.
Components publish live state and register typed actions; a server-side
gateway routes each conversation turn to one LLM backend and executes the
actions the agent calls.

High-level architecture
-----------------------

The codebase is organized around two kinds of capability:

- **Readables**: described snapshots of component state. Every agent turn
  sees the current set, aggregated into one context document and, when a
  token budget is configured, truncated oldest-first.
- **Actions**: named operations with a declared parameter schema. The agent
  calls them as tools; arguments are validated before the handler runs, and
  any failure comes back to the agent as text instead of an exception.

Core subpackages
----------------

- ``agentic_ui.bridge``:

  - The capability registry with disposer-based lifecycle.
  - Readable aggregation and action dispatch.
  - The component base class and the shipped catalog components.

- ``agentic_ui.providers``:

  - Credential reading and fixed-priority backend selection
    (OpenAI, Anthropic, Groq, Google).
  - Pydantic AI backed service adapters.

- ``agentic_ui.server``:

  - The FastAPI app, the streaming chat gateway and status endpoints.

Typical workflow
----------------

1. The app creates a ``CapabilityRegistry`` and mounts its components.
2. A chat request arrives at ``POST /api/copilotkit``.
3. The router picks a backend from the configured API keys.
4. The gateway streams text back, runs server-side actions the agent calls
   and feeds their results into the next backend turn.
5. Actions declared by the caller are relayed back for the caller to run.
"""
