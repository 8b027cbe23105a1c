"""
Kernel base classes for the slidepack pipeline.

A kernel is one deterministic step of deck packaging (load a deck file,
build the package). Kernels read their inputs from a workspace directory,
persist a JSON record of what they produced under stage<N>/, and report
failures as data rather than exceptions, so a driver (the CLI) can run
them in sequence and show a summary per step.

    workspace/
        stage1/deck_load.json           deck dictionary + cover asset path
        stage1/assets/cover.png
        stage2/package_build.json       part list, size, sha256
        output/<title-slug>.pptx
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List
import hashlib
import json
import logging

logger = logging.getLogger(__name__)


@dataclass
class KernelInput:
    """Standard input for any kernel.

    Attributes:
        workspace: Workspace root directory
        config: Kernel configuration (plain dict, see config.SlidePackConfig.to_dict)
        dependencies: Output JSON files of required kernels, by kernel name
    """
    workspace: Path
    config: Dict[str, Any]
    dependencies: Dict[str, Path] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.workspace, str):
            self.workspace = Path(self.workspace)


@dataclass
class KernelOutput:
    """Standard output from any kernel.

    Attributes:
        success: Whether execution completed without errors
        data: Structured result (JSON-serializable)
        summary: One-line human-readable summary
        output_file: Where the JSON record was persisted
        kernel_name / kernel_version: Producer identity
        execution_time_ms: Wall time of compute()
        input_hash: SHA256 prefix of config + dependencies
        warnings / errors: Diagnostics
    """
    success: bool
    data: Dict[str, Any]
    summary: str
    output_file: Path

    kernel_name: str
    kernel_version: str
    execution_time_ms: int
    input_hash: str
    dependencies_used: List[str]

    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class Kernel(ABC):
    """
    Abstract base class for slidepack kernels.

    Subclasses implement compute() and summarize() and set the class
    attributes below. compute() may raise; run() turns the exception
    into a failed KernelOutput and still writes the JSON record.

    Example:
        class EchoKernel(Kernel):
            name = "echo"
            stage = 1

            def compute(self, input):
                return {"value": input.config["value"]}

            def summarize(self, data):
                return f"echo: {data['value']}"
    """

    name: str = "base"
    version: str = "1.0.0"
    stage: int = 0
    description: str = "Base kernel"

    requires: List[str] = []

    @abstractmethod
    def compute(self, input: KernelInput) -> Dict[str, Any]:
        """Core computation. Must be deterministic for a given input."""
        pass

    @abstractmethod
    def summarize(self, data: Dict[str, Any]) -> str:
        """One-line summary of compute() output."""
        pass

    def validate_input(self, input: KernelInput) -> List[str]:
        """
        Validate input before computation. Override to add checks.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not input.workspace.exists():
            errors.append(f"Workspace does not exist: {input.workspace}")

        for dep in self.requires:
            if dep not in input.dependencies:
                errors.append(f"Missing required dependency: {dep}")
            elif not Path(input.dependencies[dep]).exists():
                errors.append(f"Dependency file does not exist: {input.dependencies[dep]}")

        return errors

    def output_path(self, input: KernelInput) -> Path:
        return input.workspace / f"stage{self.stage}" / f"{self.name}.json"

    def run(self, input: KernelInput) -> KernelOutput:
        """
        Execute the kernel: validate, compute, summarize, persist.

        Do NOT override; override compute() and summarize() instead.
        """
        start_time = datetime.now()
        warnings: List[str] = []
        errors: List[str] = []

        validation_errors = self.validate_input(input)
        if validation_errors:
            for err in validation_errors:
                logger.error(f"[{self.name}] Validation error: {err}")
            return KernelOutput(
                success=False,
                data={"validation_errors": validation_errors},
                summary=f"Kernel {self.name} failed validation: {validation_errors[0]}",
                output_file=self.output_path(input),
                kernel_name=self.name,
                kernel_version=self.version,
                execution_time_ms=0,
                input_hash="",
                dependencies_used=[],
                errors=validation_errors,
            )

        input_hash = self._hash_input(input)
        logger.info(f"[{self.name}] Starting (input_hash={input_hash[:8]})")

        try:
            data = self.compute(input)
            warnings.extend(data.pop("_warnings", []))
            summary = self.summarize(data)
            success = True
            logger.info(f"[{self.name}] Computation successful")
        except Exception as e:
            logger.error(f"[{self.name}] Computation failed: {e}")
            data = {"error": str(e), "error_type": type(e).__name__}
            summary = f"Kernel {self.name} failed: {str(e)[:100]}"
            success = False
            errors.append(str(e))

        execution_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)

        output_file = self.output_path(input)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        record = {
            "_meta": {
                "kernel_name": self.name,
                "kernel_version": self.version,
                "description": self.description,
                "execution_time_ms": execution_time_ms,
                "input_hash": input_hash,
                "timestamp": datetime.now().isoformat(),
                "success": success,
                "warnings": warnings,
            },
            "data": data,
        }
        output_file.write_text(json.dumps(record, indent=2, default=str), encoding="utf-8")
        logger.info(f"[{self.name}] Output saved to {output_file} ({execution_time_ms}ms)")

        return KernelOutput(
            success=success,
            data=data,
            summary=summary,
            output_file=output_file,
            kernel_name=self.name,
            kernel_version=self.version,
            execution_time_ms=execution_time_ms,
            input_hash=input_hash,
            dependencies_used=list(input.dependencies.keys()),
            warnings=warnings,
            errors=errors,
        )

    def _hash_input(self, input: KernelInput) -> str:
        """16-char SHA256 prefix of kernel identity, config and dependency paths."""
        content = json.dumps({
            "kernel": f"{self.name}@{self.version}",
            "config": input.config,
            "dependencies": {k: str(v) for k, v in sorted(input.dependencies.items())},
        }, sort_keys=True, default=str)
        return hashlib.sha256(content.encode()).hexdigest()[:16]

    def __repr__(self) -> str:
        return f"<Kernel {self.name}@{self.version} stage={self.stage}>"


def load_kernel_data(path: Path) -> Dict[str, Any]:
    """Read the "data" section of a persisted kernel record."""
    record = json.loads(Path(path).read_text(encoding="utf-8"))
    return record.get("data", {})
