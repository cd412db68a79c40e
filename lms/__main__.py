from lms.main import main

main()
