from countryfetch.app import main

main()
