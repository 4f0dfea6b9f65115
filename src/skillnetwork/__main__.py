from skillnetwork.main import main

main()
