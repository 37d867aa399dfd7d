from slack_mcp.cli import main

main()
