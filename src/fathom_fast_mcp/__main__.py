from fathom_fast_mcp.server import main

main()
