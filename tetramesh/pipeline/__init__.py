"""설정, 실행기, CLI."""
