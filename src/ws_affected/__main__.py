from ws_affected.cli.app import main

main()
