#!/usr/bin/env python3
"""
Speech Bubbles Setup Script
Prepares directories, the .env file and a default configuration.
"""

import shutil
import sys
from pathlib import Path


def check_python_version():
    """Check if Python version is compatible."""
    if sys.version_info < (3, 11):
        print("❌ Python 3.11 or higher is required!")
        print(f"Current version: {sys.version}")
        return False
    print(f"✅ Python version: {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    return True


def setup_directories():
    """Create necessary directories."""
    print("📁 Setting up directories...")

    for directory in ("logs", "configs"):
        Path(directory).mkdir(parents=True, exist_ok=True)

    print("✅ Directories created")


def create_env_file():
    """Create .env file from template if it doesn't exist."""
    if Path('.env').exists():
        print("✅ .env file already exists")
    elif Path('.env.template').exists():
        print("📝 Creating .env file from template...")
        shutil.copy('.env.template', '.env')
        print("✅ .env file created")
    else:
        print("⚠️  No .env template found - defaults from configs/config.yaml will be used")


def create_config_file():
    """Write the default configuration if none exists yet."""
    from speech_bubbles.core.config import Config, save_config

    if Path("configs/config.yaml").exists():
        print("✅ configs/config.yaml already exists")
        return

    save_config(Config())
    print("✅ Default configuration written to configs/config.yaml")


def main():
    """Main setup process."""
    print("🚀 Speech Bubbles Setup")
    print("=" * 40)

    if not check_python_version():
        sys.exit(1)

    setup_directories()
    create_env_file()
    create_config_file()

    print("\n🎉 Setup complete!")
    print("\n📋 Next steps:")
    print("   1. Adjust timings and viewport in configs/config.yaml")
    print("   2. Run the tests: python tests/run_tests.py")
    print("   3. Run: python main.py")


if __name__ == "__main__":
    main()
