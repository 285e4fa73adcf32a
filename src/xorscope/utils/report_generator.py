"""
Report Generation Module
Creates human-readable Markdown reports from cryptanalysis results
"""

from datetime import datetime
from typing import List

from ..core.frequency import english_score


class ReportGenerator:
    """
    Generates Markdown reports from Xorscope results

    Creates summaries including:
    - Input metadata
    - Keysize ranking
    - Recovered keys and plaintext previews
    - ECB detections
    """

    PREVIEW_CHARS = 400

    def generate_markdown(self, result, title: str = "Analysis") -> str:
        """
        Generate Markdown report for a repeating-key XOR attack

        Args:
            result: BreakResult object
            title: Report title

        Returns:
            Markdown formatted report as string
        """
        sections = [
            self._generate_header(title, result),
            self._generate_summary(result),
            self._generate_keysize_section(result),
            self._generate_recovery_section(result),
            self._generate_footer(),
        ]
        return '\n\n'.join(sections)

    def generate_ecb_markdown(self, candidates: List, title: str = "ECB Detection") -> str:
        """Generate Markdown report for ECB line detection"""
        sections = [f"# Xorscope ECB Report: {title}\n\n**Generated**: {self._timestamp()}"]

        if not candidates:
            sections.append("## Results\n\nNo ciphertext line contains a repeated block.")
        else:
            lines = ["## Results\n", "| Line | Repeated Blocks | Ciphertext (hex) |", "|---|---|---|"]
            for c in candidates:
                hex_display = c.ciphertext.hex()
                if len(hex_display) > 64:
                    hex_display = hex_display[:64] + '...'
                lines.append(f"| {c.line_number} | {c.repeated_blocks} | `{hex_display}` |")
            sections.append('\n'.join(lines))

        sections.append(self._generate_footer())
        return '\n\n'.join(sections)

    def _generate_header(self, title: str, result) -> str:
        """Generate report header"""
        return f"""# Xorscope Report: {title}

**Generated**: {self._timestamp()}
**Input**: `{result.input_name}`
**Encoding**: {result.encoding}
**Ciphertext Size**: {self._format_bytes(result.ciphertext_size)}
**Preset**: {result.config.name if result.config else 'n/a'}
"""

    def _generate_summary(self, result) -> str:
        """Generate summary"""
        best = result.best
        lines = ["## Summary\n"]

        if best is None:
            lines.append("No key was recovered.")
        else:
            lines.append(f"- **Best key**: `{best.key_text!r}` ({best.keysize} bytes)")
            lines.append(f"- **Keysizes tried**: {', '.join(str(k) for k in result.tried_keysizes)}")
            lines.append(f"- **English score**: {english_score(best.plaintext):.4f}")

        for warning in result.warnings:
            lines.append(f"- ⚠️ {warning}")

        return '\n'.join(lines)

    def _generate_keysize_section(self, result) -> str:
        """Generate keysize ranking table"""
        if not result.candidates:
            return "## Keysize Ranking\n\nNo keysize could be sampled."

        lines = ["## Keysize Ranking\n", "| Rank | Keysize | Normalized Distance |", "|---|---|---|"]
        for rank, candidate in enumerate(result.candidates[:10], 1):
            lines.append(f"| {rank} | {candidate.size} | {candidate.score:.4f} |")
        return '\n'.join(lines)

    def _generate_recovery_section(self, result) -> str:
        """Generate recovered key section"""
        if not result.recoveries:
            return "## Recovered Keys\n\nNone."

        sections = ["## Recovered Keys\n"]
        for i, recovery in enumerate(result.recoveries, 1):
            preview = recovery.plaintext_text
            if len(preview) > self.PREVIEW_CHARS:
                preview = preview[:self.PREVIEW_CHARS] + '...'

            sections.append(f"### Candidate {i}")
            sections.append(f"**Key**: `{recovery.key_text!r}` (hex `{recovery.key.hex()}`)")
            sections.append(f"**Column Score**: {recovery.score:.4f}\n")
            sections.append("```")
            sections.append(preview)
            sections.append("```\n")

        return '\n'.join(sections)

    def _generate_footer(self) -> str:
        """Generate report footer"""
        return """---

## Notes

- **Keysize Ranking**: Normalized Hamming distance; lower is more likely
- **Key Recovery**: Per-column English letter frequency; not a semantic check
- **Wrong Keys**: Produce unreadable plaintext, not errors

**Generated by**: Xorscope v1.0
"""

    def _timestamp(self) -> str:
        return datetime.now().strftime('%Y-%m-%d %H:%M:%S')

    def _format_bytes(self, size: int) -> str:
        """Format byte size to human readable"""
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size < 1024:
                return f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} TB"
