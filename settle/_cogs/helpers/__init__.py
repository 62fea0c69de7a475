"""
General-purpose helpers not related to the engine itself
(neither to the probes nor to the waiters nor to the structs),
which are used to prepare and control the runtime environment.

As a rule of thumb, helpers MUST be abstracted from the engine
to such an extent that they could be extracted as reusable libraries.
"""
