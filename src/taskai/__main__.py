from taskai.app import main

main()
