"""One-line human summaries per artifact type.

Used as the timeline ``message`` column and by report renderers.
"""

from collections.abc import Callable

from triagekit.models.artifact import Artifact

Summarizer = Callable[[Artifact], str]


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len, marking the cut with '...'."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _enabled(artifact: Artifact, key: str = "enabled") -> bool:
    return artifact.data.get(key) is True


def _toggle(label: str, key: str = "enabled", off: str = "DISABLED") -> Summarizer:
    return lambda a: f"{label}: {'enabled' if _enabled(a, key) else off}"


def _launch_agent(a: Artifact) -> str:
    return f"Launch agent: {a.get_string('name')} at {a.get_string('path')}"


def _process(a: Artifact) -> str:
    return (
        f"Process: {a.get_string('name')} (PID {a.get_string('pid')}) "
        f"by {a.get_string('username')}"
    )


def _connection(a: Artifact) -> str:
    return (
        f"Connection: {a.get_string('local_addr')}:{a.get_string('local_port')} -> "
        f"{a.get_string('remote_addr')}:{a.get_string('remote_port')} "
        f"({a.get_string('status')})"
    )


def _visit(a: Artifact) -> str:
    return f"Visit: {a.get_string('title')} ({truncate(a.get_string('url'), 60)})"


def _known_host(a: Artifact) -> str:
    entry = a.get_string("entry")
    return f"Known host: {entry.split(' ', 1)[0] if ' ' in entry else entry}"


def _unified_log(a: Artifact) -> str:
    message = a.get_string("event_message") or a.get_string("log_entry")
    category = a.get_string("category")
    process = a.get_string("process")
    if process:
        return f"[{category}] {process}: {truncate(message, 60)}"
    return f"[{category}] {truncate(message, 60)}"


SUMMARIZERS: dict[str, Summarizer] = {
    # Persistence
    "user_launch_agent": _launch_agent,
    "system_launch_agent": _launch_agent,
    "system_launch_daemon": _launch_agent,
    "login_item_btm": lambda a: f"Login item (BTM): {a.get_string('Name')}",
    "login_item_backgrounditems": lambda a: f"Background login item: {a.get_string('path')}",
    "user_crontab": lambda a: f"Cron job: {a.get_string('entry')}",
    "system_cron": lambda a: f"Cron job: {a.get_string('entry')}",
    "at_job": lambda a: f"At job: {a.get_string('job_id')}",
    # Security posture
    "gatekeeper_status": _toggle("Gatekeeper"),
    "sip_status": _toggle("SIP"),
    "firewall_status": _toggle("Firewall"),
    "filevault_status": _toggle("FileVault"),
    "apfs_encryption": _toggle("APFS encryption", key="encrypted", off="not detected"),
    "xprotect_version": lambda a: f"XProtect version: {a.get_string('version')}",
    # Processes and network
    "running_process": _process,
    "network_connection": _connection,
    "open_network_file": lambda a: (
        f"Open file: {a.get_string('command')} (PID {a.get_string('pid')}) "
        f"{a.get_string('name')}"
    ),
    "arp_entry": lambda a: (
        f"ARP: {a.get_string('ip')} -> {a.get_string('mac')} "
        f"on {a.get_string('interface')}"
    ),
    "network_interface": lambda a: f"Interface: {a.get_string('name')}",
    # User activity
    "safari_history": _visit,
    "chrome_history": _visit,
    "bash_history": lambda a: f"Shell: {truncate(a.get_string('command'), 80)}",
    "zsh_history": lambda a: f"Shell: {truncate(a.get_string('command'), 80)}",
    "recent_file": lambda a: f"Recent file: {a.get_string('name')}",
    "quarantine_event": lambda a: (
        f"Quarantine: {a.get_string('agent_name')} "
        f"from {truncate(a.get_string('origin_url'), 60)}"
    ),
    "app_usage": lambda a: f"App usage: {a.get_string('app_name')}",
    # SSH
    "ssh_private_key": lambda a: f"SSH key: {a.get_string('path')} ({a.get_string('key_type')})",
    "ssh_public_key": lambda a: f"SSH key: {a.get_string('path')} ({a.get_string('key_type')})",
    "ssh_authorized_key": lambda a: f"Authorized key: {truncate(a.get_string('key'), 50)}",
    "ssh_known_host": _known_host,
    # Extensions
    "system_extension": lambda a: f"System extension: {a.get_string('identifier')}",
    "kernel_extension": lambda a: f"Kernel extension: {a.get_string('name')}",
    "library_extension": lambda a: f"Library extension: {a.get_string('name')}",
    # Environment and privacy
    "env_variable_suspicious": lambda a: (
        f"Suspicious env: {a.get_string('key')}={truncate(a.get_string('value'), 40)} "
        f"({a.get_string('suspicious_reason')})"
    ),
    "env_variable": lambda a: f"Env: {a.get_string('key')}",
    "tcc_permission": lambda a: (
        f"TCC: {a.get_string('service')} granted to {a.get_string('client')}"
    ),
    # Applications and logs
    "system_application": lambda a: f"App: {a.get_string('name')}",
    "user_application": lambda a: f"App: {a.get_string('name')}",
    "user_crash_report": lambda a: f"Crash report: {a.get_string('filename')}",
    "system_crash_report": lambda a: f"Crash report: {a.get_string('filename')}",
    "install_log": lambda a: f"Install log: {a.get_string('path')}",
    "unified_log_security": _unified_log,
    "unified_log_network": _unified_log,
    "unified_log_process": _unified_log,
    "unified_log_errors": _unified_log,
    "system_info": lambda a: (
        f"System: {a.get_string('platform')} {a.get_string('platform_version')}"
    ),
}


def summarize(artifact: Artifact) -> str:
    """Return a one-line summary for an artifact."""
    summarizer = SUMMARIZERS.get(artifact.artifact_type)
    if summarizer is not None:
        return summarizer(artifact)

    label = artifact.artifact_type.replace("_", " ")
    name = artifact.get_string("name")
    if name:
        return f"{label}: {name}"
    return label
