"""
Contract Deployment Wrapper
Runs scripts/deploy_contract.py
"""

import subprocess
import sys

if __name__ == "__main__":
    print("=" * 70)
    print("NFT Marketplace Contract Deployment")
    print("=" * 70)
    print()

    # Run deployment script as a module so the project packages resolve
    result = subprocess.run(
        [sys.executable, "-m", "scripts.deploy_contract"],
        cwd="."
    )

    sys.exit(result.returncode)
