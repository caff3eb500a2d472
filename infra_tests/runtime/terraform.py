"""Terraform execution and management."""

import json
import logging
import os
import re
import shlex
import subprocess
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from infra_tests.logging import Logger, NullLogger
from infra_tests.runtime.options import TerraformOptions

logger = logging.getLogger(__name__)


class TerraformCommandError(RuntimeError):
    """A terraform command exited non-zero (after any retries)."""

    def __init__(self, command: List[str], returncode: int, stdout: str, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = (stderr or stdout).strip()
        super().__init__(
            f"'{shlex.join(command)}' failed with exit code {returncode}"
            + (f":\n{detail}" if detail else "")
        )


def format_hcl(value: Any) -> str:
    """Render a Python value as an HCL literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return "null"
    if isinstance(value, dict):
        items = ", ".join(f"{json.dumps(str(k))} = {format_hcl(v)}" for k, v in value.items())
        return "{" + items + "}"
    if isinstance(value, (list, tuple, set)):
        return "[" + ", ".join(format_hcl(v) for v in value) + "]"
    return json.dumps(str(value))


def format_var_args(variables: Dict[str, Any]) -> List[str]:
    """
    Turn a configuration map into terraform -var arguments.

    Top-level strings are passed raw, everything else as an HCL literal.
    """
    args = []
    for key, value in variables.items():
        rendered = value if isinstance(value, str) else format_hcl(value)
        args.extend(['-var', f'{key}={rendered}'])
    return args


def _render_scalar(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value)


class TerraformRuntime:
    """Manages Terraform lifecycle operations for one module directory."""

    def __init__(
        self,
        options: TerraformOptions,
        events: Optional[Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize Terraform runtime.

        Args:
            options: Module directory, variables and retry policy
            events: Optional event logger for lifecycle events
            sleep: Sleep function used between retries
        """
        self.options = options
        self.working_dir = Path(options.terraform_dir)
        self.events = events or NullLogger()
        self._sleep = sleep

        if not self.working_dir.is_dir():
            raise FileNotFoundError(f"Terraform directory not found: {self.working_dir}")

    def init(self) -> Dict[str, Any]:
        """Run terraform init."""
        result = self._run_with_retries(['init', '-upgrade=false', '-input=false'])
        self.events.info("terraform.init", f"Initialized {self.working_dir.name}", {"success": True})
        return result

    def validate(self) -> Dict[str, Any]:
        """
        Run terraform validate.

        Returns:
            Result dictionary with returncode, stdout, stderr and parsed diagnostics
        """
        result = self._run_command(self._command(['validate', '-json']))
        try:
            result['diagnostics'] = json.loads(result['stdout']).get('diagnostics', [])
        except json.JSONDecodeError:
            result['diagnostics'] = []
        return result

    def plan(self, out_file: Optional[str] = None) -> Dict[str, Any]:
        """
        Run terraform plan with the configured variables.

        Args:
            out_file: Optional plan file to write
        """
        args = ['plan', '-input=false', '-lock=false']
        if out_file:
            args.append(f'-out={out_file}')
        return self._run_with_retries(args + format_var_args(self.options.vars))

    def apply(self) -> Dict[str, Any]:
        """Run terraform apply with the configured variables."""
        start = time.monotonic()
        args = ['apply', '-input=false', '-auto-approve', '-lock=false']
        result = self._run_with_retries(args + format_var_args(self.options.vars))
        self.events.info(
            "terraform.apply",
            f"Applied {self.working_dir.name}",
            {"success": True, "duration_seconds": round(time.monotonic() - start, 1)},
        )
        return result

    def destroy(self) -> Dict[str, Any]:
        """Run terraform destroy with the configured variables."""
        start = time.monotonic()
        args = ['destroy', '-input=false', '-auto-approve', '-lock=false']
        result = self._run_with_retries(args + format_var_args(self.options.vars))
        self.events.info(
            "terraform.destroy",
            f"Destroyed {self.working_dir.name}",
            {"success": True, "duration_seconds": round(time.monotonic() - start, 1)},
        )
        return result

    def output_json(self, output_name: Optional[str] = None) -> Any:
        """
        Get terraform outputs as parsed JSON.

        Args:
            output_name: Specific output to retrieve (None for all)

        Returns:
            Parsed value of the output, or the full output document
        """
        args = ['output', '-json']
        if output_name:
            args.append(output_name)

        result = self._run_with_retries(args)
        try:
            return json.loads(result['stdout'])
        except json.JSONDecodeError as e:
            raise ValueError(f"terraform output returned invalid JSON: {e}") from e

    def output(self, output_name: str) -> str:
        """Get a single output rendered as a string."""
        return _render_scalar(self.output_json(output_name))

    def output_list(self, output_name: str) -> List[str]:
        """Get a list output; each element rendered as a string."""
        value = self.output_json(output_name)
        if not isinstance(value, list):
            raise ValueError(f"Output {output_name} is not a list: {value!r}")
        return [_render_scalar(item) for item in value]

    def output_map(self, output_name: str) -> Dict[str, str]:
        """Get a map output; each value rendered as a string."""
        value = self.output_json(output_name)
        if not isinstance(value, dict):
            raise ValueError(f"Output {output_name} is not a map: {value!r}")
        return {str(k): _render_scalar(v) for k, v in value.items()}

    def output_all(self) -> Dict[str, Any]:
        """Get all outputs as a name -> value mapping."""
        document = self.output_json()
        return {name: entry.get('value') for name, entry in document.items()}

    def _command(self, args: List[str]) -> List[str]:
        cmd = [self.options.terraform_binary] + args
        if self.options.no_color:
            cmd.insert(2, '-no-color')
        return cmd

    def _match_retryable(self, output: str) -> Optional[str]:
        """Return the description of the first retryable pattern found in output."""
        for pattern, description in self.options.retryable_errors.items():
            if re.search(pattern, output):
                return description
        return None

    def _run_with_retries(self, args: List[str]) -> Dict[str, Any]:
        """
        Run a terraform command, re-running it on retryable errors.

        Raises:
            TerraformCommandError: on a non-retryable failure or once retries are exhausted
        """
        cmd = self._command(args)
        max_retries = self.options.max_retries or 0
        time_between = self.options.time_between_retries or 0

        attempt = 0
        while True:
            attempt += 1
            result = self._run_command(cmd)
            if result['success']:
                return result

            reason = self._match_retryable(result['stdout'] + result['stderr'])
            if reason is None or attempt > max_retries:
                raise TerraformCommandError(cmd, result['returncode'], result['stdout'], result['stderr'])

            logger.warning(f"'{args[0]}' failed ({reason}); retrying in {time_between}s")
            self.events.warning(
                "terraform.retry",
                f"Retrying terraform {args[0]}: {reason}",
                {"attempt": attempt, "max_retries": max_retries},
            )
            self._sleep(time_between)

    def _run_command(self, cmd: List[str]) -> Dict[str, Any]:
        """
        Run a terraform command.

        Args:
            cmd: Command and arguments

        Returns:
            Dictionary with returncode, stdout, stderr
        """
        env = dict(os.environ)
        env.update(self.options.env_vars)
        env['TF_IN_AUTOMATION'] = '1'

        timeout = self.options.timeout
        logger.debug(f"Running: {shlex.join(cmd)} (cwd={self.working_dir})")

        try:
            result = subprocess.run(
                cmd,
                cwd=self.working_dir,
                env=env,
                capture_output=True,
                text=True,
                timeout=timeout
            )

            return {
                'returncode': result.returncode,
                'stdout': result.stdout,
                'stderr': result.stderr,
                'success': result.returncode == 0
            }

        except subprocess.TimeoutExpired:
            return {
                'returncode': -1,
                'stdout': '',
                'stderr': f'Command timed out after {timeout} seconds',
                'success': False
            }
        except FileNotFoundError:
            return {
                'returncode': -1,
                'stdout': '',
                'stderr': f'Command not found: {cmd[0]}',
                'success': False
            }


def init_and_apply(options: TerraformOptions, events: Optional[Logger] = None) -> str:
    """Run terraform init followed by apply; return the apply output."""
    runtime = TerraformRuntime(options, events=events)
    runtime.init()
    return runtime.apply()['stdout']


def destroy(options: TerraformOptions, events: Optional[Logger] = None) -> str:
    """Run terraform destroy; return its output."""
    return TerraformRuntime(options, events=events).destroy()['stdout']


def output(options: TerraformOptions, name: str) -> str:
    """Read a single output as a string."""
    return TerraformRuntime(options).output(name)


def output_list(options: TerraformOptions, name: str) -> List[str]:
    """Read a list output."""
    return TerraformRuntime(options).output_list(name)


def output_map(options: TerraformOptions, name: str) -> Dict[str, str]:
    """Read a map output."""
    return TerraformRuntime(options).output_map(name)
