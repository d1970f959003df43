"""scanlink -- authenticated connections to a security-scanning server.

This package manages the credentials and HTTP clients needed to talk to a
remote scan server and to a companion module-metadata service. Credentials
are resolved from persisted state, the OS secret vault, or interactive
prompts, verified against the server, and only then persisted.

Typical workflow::

    scanlink connect                       # prompt, verify, persist
    scanlink components gav://org:lib:1.0  # query the scan server

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration, durable state, ambient HTTP settings.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
