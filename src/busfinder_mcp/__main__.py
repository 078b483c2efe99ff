from busfinder_mcp.server import main

main()
