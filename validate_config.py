#!/usr/bin/env python3
"""
Configuration Validation Tool

Validates YAML configuration files for the wave order picking system and
provides detailed feedback about parameter values and potential issues.
Optionally checks the configuration against an instance file.
"""

import sys
import argparse
from pathlib import Path
from typing import Dict, Any, Optional

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from waveopt.config_loader import load_config, validate_config, get_solver_config
from waveopt.instance_io import read_instance


class ConfigValidator:
    """Configuration validator with detailed feedback"""

    def __init__(self):
        self.warnings = []
        self.errors = []
        self.recommendations = []

    def validate_comprehensive(self, config_path: str, instance_path: Optional[str] = None) -> Dict[str, Any]:
        """Perform comprehensive validation with detailed feedback"""
        try:
            config = load_config(config_path)
        except Exception as e:
            return {
                'valid': False,
                'errors': [f"Failed to load configuration: {e}"],
                'warnings': [],
                'recommendations': [],
                'summary': {}
            }

        self.warnings = []
        self.errors = []
        self.recommendations = []

        # Basic validation
        self.errors.extend(validate_config(config))

        # Advanced validation
        self._validate_solver(get_solver_config(config))
        self._validate_genetic(config.get('genetic') or {}, get_solver_config(config))
        self._validate_visualization(config.get('visualization') or {})

        summary = self._generate_summary(config)

        if instance_path:
            summary['instance'] = self._validate_instance(instance_path, config)

        return {
            'valid': len(self.errors) == 0,
            'errors': self.errors,
            'warnings': self.warnings,
            'recommendations': self.recommendations,
            'summary': summary
        }

    def _validate_solver(self, solver_config: Dict[str, Any]):
        """Validate solver section"""
        limit = solver_config.get('time_limit_seconds', 600)
        if isinstance(limit, (int, float)) and limit > 600:
            self.warnings.append(f"time_limit_seconds ({limit}) exceeds the usual 600s budget")

        seed = solver_config.get('random_seed')
        if seed is None or seed == "random":
            self.recommendations.append("Set an integer random_seed for reproducible runs")

    def _validate_genetic(self, genetic_config: Dict[str, Any], solver_config: Dict[str, Any]):
        """Validate genetic section"""
        if solver_config.get('strategy') == 'greedy':
            return

        if not genetic_config.get('enabled', True):
            self.warnings.append(
                f"Strategy '{solver_config.get('strategy')}' with genetic.enabled=false runs greedy only"
            )
            return

        population = genetic_config.get('population_size', 100)
        generations = genetic_config.get('generations', 100)
        tournament = genetic_config.get('tournament_size', 3)
        mutation = genetic_config.get('mutation_rate', 0.05)

        if isinstance(population, int) and isinstance(tournament, int) and tournament > population > 0:
            self.warnings.append(f"tournament_size ({tournament}) exceeds population_size ({population})")
        if isinstance(population, int) and 0 < population < 10:
            self.warnings.append(f"Small population ({population}) may converge prematurely")
        if isinstance(mutation, (int, float)) and mutation > 0.2:
            self.warnings.append(f"High mutation_rate ({mutation}) makes the search close to random")
        if isinstance(population, int) and isinstance(generations, int) and population * generations > 100000:
            self.recommendations.append("Large population x generations - the time budget may cut the run short")

    def _validate_visualization(self, vis_config: Dict[str, Any]):
        """Validate visualization configuration"""
        if not vis_config:
            return  # Optional section

        figure_size = vis_config.get('figure_size', [12, 8])

        if isinstance(figure_size, list) and len(figure_size) == 2:
            width, height = figure_size
            if width <= 0 or height <= 0:
                self.errors.append("figure_size dimensions must be positive")
            elif width > 30 or height > 30:
                self.warnings.append(f"Large figure_size {figure_size} may cause display issues")
        else:
            self.errors.append("figure_size must be a [width, height] list")

    def _validate_instance(self, instance_path: str, config: Dict[str, Any]) -> Dict[str, Any]:
        """Load an instance and check it against the configuration"""
        try:
            instance = read_instance(instance_path)
        except Exception as e:
            self.errors.append(f"Failed to load instance: {e}")
            return {}

        total_units = sum(instance.order_units)
        if total_units < instance.wave_size_lb:
            self.errors.append(
                f"All orders together hold {total_units} units, below the lower bound {instance.wave_size_lb}"
            )
        if instance.n_aisles == 0:
            self.errors.append("Instance has no aisles")

        genetic_config = config.get('genetic') or {}
        population = genetic_config.get('population_size', 100)
        if isinstance(population, int) and instance.n_orders > 0 and population > 50 * instance.n_orders:
            self.recommendations.append("Population is much larger than the number of orders")

        return {
            'orders': instance.n_orders,
            'items': instance.n_items,
            'aisles': instance.n_aisles,
            'total_units': total_units,
            'wave_window': f"[{instance.wave_size_lb}, {instance.wave_size_ub}]"
        }

    def _generate_summary(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Generate configuration summary"""
        solver_config = get_solver_config(config)
        summary = {
            'solver': {
                'strategy': solver_config.get('strategy'),
                'time_limit_seconds': solver_config.get('time_limit_seconds'),
                'reproducible': solver_config.get('random_seed') not in (None, "random")
            }
        }

        genetic_config = config.get('genetic') or {}
        if genetic_config:
            summary['genetic'] = {
                'enabled': genetic_config.get('enabled', True),
                'population_size': genetic_config.get('population_size', 100),
                'generations': genetic_config.get('generations', 100)
            }

        return summary


def main():
    """Main validation function"""
    parser = argparse.ArgumentParser(
        description="Validate YAML configuration files for the wave order picking system",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'config_file',
        nargs='?',
        default='config.yaml',
        help='Configuration file to validate (default: config.yaml)'
    )

    parser.add_argument(
        '--instance', '-i',
        help='Also check the configuration against this instance file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed validation information'
    )

    parser.add_argument(
        '--warnings-only', '-w',
        action='store_true',
        help='Show only warnings and errors (no recommendations)'
    )

    args = parser.parse_args()

    validator = ConfigValidator()
    result = validator.validate_comprehensive(args.config_file, args.instance)

    # Print results
    print("=" * 60)
    print("CONFIGURATION VALIDATION REPORT")
    print("=" * 60)
    print(f"File: {args.config_file}")
    print(f"Status: {'VALID' if result['valid'] else 'INVALID'}")
    print()

    if result['errors']:
        print("ERRORS:")
        for error in result['errors']:
            print(f"  - {error}")
        print()

    if result['warnings']:
        print("WARNINGS:")
        for warning in result['warnings']:
            print(f"  - {warning}")
        print()

    if result['recommendations'] and not args.warnings_only:
        print("RECOMMENDATIONS:")
        for rec in result['recommendations']:
            print(f"  - {rec}")
        print()

    if result['summary'] and args.verbose:
        print("SUMMARY:")
        for section, data in result['summary'].items():
            print(f"  {section.title()}:")
            for key, value in data.items():
                print(f"    {key}: {value}")
        print()

    print("=" * 60)

    sys.exit(0 if result['valid'] else 1)


if __name__ == "__main__":
    main()
